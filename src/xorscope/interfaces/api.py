"""
FastAPI REST API Interface
Programmatic access to Xorscope for automation and integration
"""

from fastapi import FastAPI, File, UploadFile, Form, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional

from xorscope import __version__
from xorscope.core.engine import XorscopeEngine
from xorscope.core.errors import XorscopeError
from xorscope.core.presets import get_config


# Initialize FastAPI app
app = FastAPI(
    title="Xorscope API",
    description="Repeating-key XOR cryptanalysis and ECB detection",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


def _engine(preset: str, max_keysize: Optional[int], top_n: Optional[int],
            all_blocks: bool = False, block_size: Optional[int] = None) -> XorscopeEngine:
    overrides = {'max_keysize': max_keysize, 'top_n': top_n, 'block_size': block_size}
    if all_blocks:
        overrides['sample_blocks'] = None
    try:
        config = get_config(preset, **overrides)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return XorscopeEngine(config=config, verbose=False)


@app.get("/")
async def root():
    """
    API root endpoint - health check and info
    """
    return {
        "service": "Xorscope API",
        "version": __version__,
        "status": "operational",
        "endpoints": {
            "break": "/break",
            "break_file": "/break-file",
            "detect_ecb": "/detect-ecb",
            "health": "/health",
            "docs": "/docs"
        }
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring
    """
    return {
        "status": "healthy",
        "service": "xorscope-api",
        "version": __version__
    }


@app.post("/break")
async def break_ciphertext(
    ciphertext: str = Form(..., description="Encoded ciphertext"),
    encoding: str = Form("base64", description="base64, hex or raw"),
    preset: str = Form("balanced", description="Breaker preset"),
    max_keysize: Optional[int] = Form(None, description="Exclusive upper bound on key length"),
    top_n: Optional[int] = Form(None, description="Number of keysizes to solve"),
    all_blocks: bool = Form(False, description="Average over every chunk")
):
    """
    Recover a repeating XOR key from encoded ciphertext

    Example:
    ```bash
    curl -X POST "http://localhost:8000/break" \
         -F "ciphertext=$(cat 6.txt)" \
         -F "top_n=3"
    ```
    """
    engine = _engine(preset, max_keysize, top_n, all_blocks)

    try:
        result = await run_in_threadpool(
            engine.break_text, ciphertext, encoding=encoding, input_name="form_input"
        )
    except (XorscopeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


@app.post("/break-file")
async def break_file(
    file: UploadFile = File(..., description="Ciphertext file"),
    encoding: str = Form("base64", description="base64, hex or raw"),
    preset: str = Form("balanced", description="Breaker preset"),
    max_keysize: Optional[int] = Form(None),
    top_n: Optional[int] = Form(None),
    all_blocks: bool = Form(False)
):
    """
    Recover a repeating XOR key from an uploaded ciphertext file
    """
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large. Maximum size: 10MB")

    engine = _engine(preset, max_keysize, top_n, all_blocks)

    try:
        if encoding == "raw":
            result = await run_in_threadpool(
                engine.break_bytes, content, input_name=file.filename, encoding=encoding
            )
        else:
            result = await run_in_threadpool(
                engine.break_text, content.decode('latin-1'), encoding=encoding,
                input_name=file.filename
            )
    except (XorscopeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


@app.post("/detect-ecb")
async def detect_ecb(
    ciphertexts: str = Form(..., description="One encoded ciphertext per line"),
    encoding: str = Form("hex", description="hex or base64"),
    block_size: int = Form(16, description="Cipher block size in bytes")
):
    """
    Flag ciphertext lines that contain repeated blocks (likely ECB mode)
    """
    engine = _engine("balanced", None, None, block_size=block_size)

    try:
        candidates = await run_in_threadpool(
            engine.detect_ecb_lines, ciphertexts.splitlines(), encoding=encoding
        )
    except (XorscopeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "block_size": block_size,
        "detections": [c.to_dict() for c in candidates]
    }


def main():
    """Serve the API with uvicorn"""
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
