"""Service endpoints and client settings, read from the environment."""

import os

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file

# binary topology file -> compressed XML
DECODE_URL = os.getenv("NETBUILD_DECODE_URL", "http://127.0.0.1:9000/pka2xml")

# XML -> DSL + graph (/api/convert) and DSL -> graph (/reactflow)
COMPILER_URL = os.getenv("NETBUILD_COMPILER_URL", "http://127.0.0.1:5000")

# snippet store (/snippets)
STORE_URL = os.getenv("NETBUILD_STORE_URL", "http://127.0.0.1:5000")

# bearer token for the compiler and the store; auth itself lives elsewhere
API_TOKEN = os.getenv("NETBUILD_API_TOKEN") or None

REQUEST_TIMEOUT = float(os.getenv("NETBUILD_TIMEOUT", "30"))
