import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from routers.auth import router as auth_router
from routers.checkout import router as checkout_router
from routers.invitations import router as invitations_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Ganty API")

app.include_router(checkout_router)
app.include_router(invitations_router)
app.include_router(auth_router)


@app.get("/health")
@app.head("/health")
async def health():
    return JSONResponse(content={"status": "ok"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
