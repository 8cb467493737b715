"""Static upload form served on ``GET /upload`` for trying the service from a browser."""

from __future__ import annotations

UPLOAD_FORM_HTML = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Upload receipt</title>
  </head>
  <body>
    <h1>Upload receipt</h1>
    <form enctype="multipart/form-data" action="/upload" method="post">
      <label for="userID">User ID</label>
      <input type="text" id="userID" name="userID" required>
      <input type="file" name="uploadFile" accept="image/jpeg,.jpg,.jpeg" required>
      <input type="submit" value="Upload">
    </form>
    <p>Download later via
      <code>/receipts?userid=&lt;userID&gt;&amp;filename=&lt;fileID&gt;.jpg&amp;scale=&lt;0.1-2.0&gt;</code>
    </p>
  </body>
</html>
""".strip()
