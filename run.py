# run.py

import uvicorn
import os

# hosting platforms hand the port in through PORT
port = int(os.environ.get("PORT", 8000))

if __name__ == "__main__":
    uvicorn.run(
        "drkleen.main:app",
        host="0.0.0.0",
        port=port,
        reload=False
    )
