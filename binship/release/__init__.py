# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version and publish coordination.

Keeps one version of truth in the primary manifest, propagates it to every
platform manifest and optional-dependency constraint, checks that they agree,
and drives the ordered, fail-fast publish sequence against the registry.
"""
