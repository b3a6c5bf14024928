# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Minimal blog: registration/login with signed session cookies and author-scoped posts."""

__version__ = "0.1.0"
