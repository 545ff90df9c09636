# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Child process execution seam (real subprocess runner and its protocol).
"""
