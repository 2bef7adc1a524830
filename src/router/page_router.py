from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["pages"])

UPLOAD_PAGE = """\
<html>
    <body style="font-family: Arial, sans-serif; padding: 50px;">
        <h2>AsyncArt Test Upload</h2>
        <p>Select a 2D image to upload to S3 and queue a processing job.</p>

        <form action="/upload" method="POST" enctype="multipart/form-data">
            <input type="file" name="image" accept="image/*" required style="margin-bottom: 20px;"/><br>
            <button type="submit" style="padding: 10px 20px; background: #007bff; color: white; border: none; border-radius: 5px; cursor: pointer;">
                Upload &amp; Queue Job
            </button>
        </form>
    </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def home():
    """테스트용 업로드 폼."""
    return UPLOAD_PAGE
