# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
binship: cross-platform binary release pipeline.

Builds one executable for every supported OS/CPU target, wraps each binary in
its own registry package, keeps every package on the same version as the
primary package, and publishes them in a fixed order.
"""

__version__ = "0.1.0"
