# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
