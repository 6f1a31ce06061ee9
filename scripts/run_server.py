import os
import sys
from pathlib import Path

import uvicorn

sys.path.insert(0, str(Path(__file__).parent.parent))

if __name__ == "__main__":
    port = int(os.getenv("PORT", "3001"))
    print("Starting Marketplace API...")
    print(f"Docs available at: http://localhost:{port}/docs")

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("RELOAD", "").lower() in ("1", "true", "yes"),
    )
