import json
import logging
import os
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .solver import INVALID_INPUT, solve_timetabling_problem

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Timetabling Solver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/solve")
async def solve_timetabling(problem_data: Any = Body(...)) -> Dict[str, Any]:
    # The body is taken raw: the solver does its own validation so that
    # malformed documents come back as 400 with every problem listed.
    try:
        # the search is CPU bound and synchronous, keep it off the event loop
        solution = await run_in_threadpool(
            solve_timetabling_problem,
            problem_data,
            time_limit_seconds=settings.time_limit_seconds,
            node_limit=settings.node_limit,
        )
    except Exception as e:
        logger.exception("Unexpected solver failure")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")

    if solution["status"] == INVALID_INPUT:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "status": INVALID_INPUT, "errors": solution["errors"]},
        )
    return {"success": solution["status"] == "FEASIBLE", **solution}


@app.get("/")
async def read_root():
    return {"message": "Timetabling Solver API"}


@app.get("/health")
def health() -> Dict[str, str]:
    return {"ok": "true"}


@app.get("/example")
async def example_problem():
    path = os.path.join(os.path.dirname(__file__), "example.json")
    with open(path, "r") as f:
        return json.load(f)


def run() -> None:
    import uvicorn

    uvicorn.run("timetabler.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
