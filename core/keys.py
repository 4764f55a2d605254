# -*- coding: utf-8 -*-
"""Single source of truth for persisted keys.

These are *storage keys* in the blob store and in the JSON records it holds.
There is no schema version: keep them stable.
"""

from __future__ import annotations


class CollectionKeys:
    CONTROLLERS = "controller_docs"
    TEMPLATES = "controller_templates"
    FIXTURES = "fixture_configs"


class RecordKeys:
    ID = "id"
    CAMPUS = "campus"
    BUILDING = "building"
    FLOOR = "floor"
    ZONE = "zone"
    CONTROLLER_NUMBER = "controllerNumber"
    CHANNELS = "channels"
    POWER_LIMIT = "powerLimit"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"

    CHANNEL_NUMBER = "channelNumber"
    FIXTURE_TYPE = "fixtureType"
    VOLTAGE = "voltage"
    CURRENT = "current"
    PARALLEL_COUNT = "parallelCount"

    NAME = "name"
    DESCRIPTION = "description"
