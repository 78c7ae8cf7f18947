#!/usr/bin/env python3
"""
Export OpenAPI schema from the FastAPI app to a JSON file.
The front end generates its API client from this file.
"""
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from transmitter_dashboard.main import app

if __name__ == "__main__":
    output_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / "docs" / "openapi.json"
    output_file.parent.mkdir(parents=True, exist_ok=True)

    # Generate OpenAPI schema
    openapi_schema = app.openapi()

    # Write to file
    with open(output_file, "w") as f:
        json.dump(openapi_schema, f, indent=2)

    print(f"✓ OpenAPI schema exported to {output_file}")
    print(f"  Title: {openapi_schema.get('info', {}).get('title')}")
    print(f"  Endpoints: {len(openapi_schema.get('paths', {}))}")
