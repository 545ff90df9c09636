# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Project configuration: YAML loading, pydantic schema, resolved settings.
"""
