from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from storefront.core.dependencies import get_image_store
from storefront.core.storage import ImageStore

router = APIRouter(tags=["files"])


@router.get("/{file_name}")
def get_uploaded_file(file_name: str, store: ImageStore = Depends(get_image_store)):
    file_path = store.path_for(file_name)
    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(file_path)
