# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for PulseCheck."""

from .report import ProbeReport

__all__ = ["ProbeReport"]
