#!/usr/bin/env python
#
# Demonstrate a simple SmartCast device discovery.
#

import smartcast

for description in smartcast.discover(timeout=5):
    print(description.friendly_name, "@", description.ip)
    print("   ", description.model_name, description.uuid)
