# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Generation of per-platform registry packages from built binaries.
"""
