# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    events: Document change webhooks (payments, users).
"""

from fastapi import APIRouter

from nodues.api.v1 import events

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(events.router, prefix="/events", tags=["Change Events"])
