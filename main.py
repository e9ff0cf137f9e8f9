# main.py
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI
from config.settings import settings
from repository.store_factory import open_store
from util.logger import init_logger


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    try:
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        fastApi.state.store = await open_store(settings)
        print(f"{Color.BLUE}Server Started{Color.RESET} store={settings.STORE_BACKEND.value}")
    except Exception as e:
        print("Failed to open record store:", e)
        raise

    try:
        yield
    finally:
        # Flush & release the store before the process exits
        await fastApi.state.store.close()
        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
