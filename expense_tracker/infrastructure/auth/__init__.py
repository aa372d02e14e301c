# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .guard import AuthGuard, current_user_id, extract_token

__all__ = ["AuthGuard", "current_user_id", "extract_token"]
