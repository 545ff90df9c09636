# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Fixed target catalog and the toolchain-to-registry name mappings.
"""
