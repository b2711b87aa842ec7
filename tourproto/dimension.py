# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

from enum import IntEnum


class Dimensionality(IntEnum):
    ONED = 1
    TWOD = 2


SUPPORTED_DIMENSIONALITIES = (Dimensionality.ONED, Dimensionality.TWOD)
