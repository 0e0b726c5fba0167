# (c) Copyright IBM Corp. 2025

import os

os.environ["TRACEWIRE_TEST"] = "true"
