"""
main.py - FastAPI backend for the legal prompt assistant

Endpoints:
- GET    /options                              : legal areas, tones, language registers
- POST   /sessions                             : new workflow session -> session_id & state
- GET    /sessions/{session_id}                : current state
- PATCH  /sessions/{session_id}/form           : edit role/task/context/tone/language
- POST   /sessions/{session_id}/area           : pick a legal area (role follows if untouched)
- POST   /sessions/{session_id}/attachments    : upload one or more files
- DELETE /sessions/{session_id}/attachments/{index}
- POST   /sessions/{session_id}/improve        : let the model rewrite the prompt
- POST   /sessions/{session_id}/execute        : run the prompt (+ image attachments)
- POST   /sessions/{session_id}/response/toggle-edit
- PUT    /sessions/{session_id}/response       : replace the response text while editable
- GET    /sessions/{session_id}/prompt/download   : prompt-juridico.txt
- GET    /sessions/{session_id}/response/download : respuesta-ia.md
- DELETE /sessions/{session_id}
"""
import logging
import os
import uuid
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

from catalog import options
from gemini_service import GeminiGateway, init_client
from workflow import Attachment, FileExport, WorkflowController

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Legal Prompt Assistant (Gemini)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # add your frontend URLs
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory store, one controller per browser session. Never persisted.
SESSIONS: Dict[str, WorkflowController] = {}

_gateway: Optional[GeminiGateway] = None


@app.on_event("startup")
async def init_gateway():
    # API_KEY is required; a missing key aborts startup.
    global _gateway
    _gateway = GeminiGateway(client=init_client())
    logger.info("Gemini client initialized (model=%s)", _gateway.model_name)


def get_gateway() -> GeminiGateway:
    if _gateway is None:
        raise HTTPException(status_code=503, detail="AI gateway not initialized.")
    return _gateway


def get_session(session_id: str) -> WorkflowController:
    controller = SESSIONS.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="session_id not found.")
    return controller


def _download(export: Optional[FileExport], what: str) -> Response:
    if export is None:
        raise HTTPException(status_code=404, detail=f"No {what} available to download.")
    return Response(
        content=export.content,
        media_type=f"{export.media_type}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@app.get("/")
async def root():
    return {"message": "Legal prompt assistant API is running!"}


@app.get("/health")
async def health():
    return {"status": "healthy", "message": "API is running"}


@app.get("/options")
async def get_options():
    return options()


class SessionResponse(BaseModel):
    session_id: str
    state: dict


@app.post("/sessions", response_model=SessionResponse)
async def create_session(gateway: GeminiGateway = Depends(get_gateway)):
    session_id = str(uuid.uuid4())
    SESSIONS[session_id] = WorkflowController(gateway)
    logger.info("Created session %s", session_id)
    return SessionResponse(session_id=session_id, state=SESSIONS[session_id].snapshot())


@app.get("/sessions/{session_id}")
async def get_state(controller: WorkflowController = Depends(get_session)):
    return controller.snapshot()


@app.delete("/sessions/{session_id}")
async def delete_session(session_id: str, controller: WorkflowController = Depends(get_session)):
    del SESSIONS[session_id]
    return {"session_id": session_id, "message": "Session discarded."}


class FormUpdateRequest(BaseModel):
    role: Optional[str] = None
    task: Optional[str] = None
    context: Optional[str] = None
    tone: Optional[str] = None
    language: Optional[str] = None


@app.patch("/sessions/{session_id}/form")
async def update_form(req: FormUpdateRequest, controller: WorkflowController = Depends(get_session)):
    try:
        controller.update_form(**req.model_dump(exclude_unset=True, exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return controller.snapshot()


class AreaRequest(BaseModel):
    area: str


@app.post("/sessions/{session_id}/area")
async def select_area(req: AreaRequest, controller: WorkflowController = Depends(get_session)):
    try:
        controller.select_area(req.area)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return controller.snapshot()


@app.post("/sessions/{session_id}/attachments")
async def upload_attachments(
    files: List[UploadFile] = File(...),
    controller: WorkflowController = Depends(get_session),
):
    received = []
    for file in files:
        contents = await file.read()
        received.append(
            Attachment(
                name=file.filename or "archivo",
                mime_type=file.content_type or "application/octet-stream",
                data=contents,
            )
        )
        logger.info("Received file: %s, content_type: %s", file.filename, file.content_type)
    controller.add_attachments(received)
    return controller.snapshot()


@app.delete("/sessions/{session_id}/attachments/{index}")
async def remove_attachment(index: int, controller: WorkflowController = Depends(get_session)):
    try:
        controller.remove_attachment(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return controller.snapshot()


def _require_runnable(controller: WorkflowController) -> None:
    if not controller.prompt:
        raise HTTPException(status_code=400, detail="Fill in task and context to build a prompt first.")


@app.post("/sessions/{session_id}/improve")
async def improve(controller: WorkflowController = Depends(get_session)):
    _require_runnable(controller)
    if not await controller.improve():
        raise HTTPException(status_code=409, detail="Another AI request is already running.")
    return controller.snapshot()


@app.post("/sessions/{session_id}/execute")
async def execute(controller: WorkflowController = Depends(get_session)):
    _require_runnable(controller)
    if not await controller.execute():
        raise HTTPException(status_code=409, detail="Another AI request is already running.")
    return controller.snapshot()


@app.post("/sessions/{session_id}/response/toggle-edit")
async def toggle_edit(controller: WorkflowController = Depends(get_session)):
    controller.toggle_edit()
    return controller.snapshot()


class ResponseEditRequest(BaseModel):
    text: str


@app.put("/sessions/{session_id}/response")
async def edit_response(req: ResponseEditRequest, controller: WorkflowController = Depends(get_session)):
    if not controller.edit_response(req.text):
        raise HTTPException(status_code=409, detail="Response is not in edit mode.")
    return controller.snapshot()


@app.get("/sessions/{session_id}/prompt/download")
async def download_prompt(controller: WorkflowController = Depends(get_session)):
    return _download(controller.prompt_export(), "prompt")


@app.get("/sessions/{session_id}/response/download")
async def download_response(controller: WorkflowController = Depends(get_session)):
    return _download(controller.response_export(), "response")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.getenv("BIND_HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
