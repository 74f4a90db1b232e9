# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors
