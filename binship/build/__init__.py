# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Clean-room parallel cross-compilation of every catalog target.
"""
