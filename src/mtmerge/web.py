"""
Flask web application for score merging.
Provides a web interface for uploading a gradebook export, a scores file,
and a mapping file, and downloading the updated gradebook.
"""

import os
import tempfile
from pathlib import Path

from flask import Flask, request, jsonify, send_file, render_template_string
from werkzeug.utils import secure_filename

from .config import DEFAULT_COLUMNS
from .join import merge_files
from .menu import updated_filename

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB max file size

# Store uploaded files in temporary directory
UPLOAD_FOLDER = tempfile.mkdtemp()
app.config['UPLOAD_FOLDER'] = UPLOAD_FOLDER


@app.route('/')
def index():
    """Serve the main page."""
    return render_template_string(HTML_TEMPLATE, default_column=DEFAULT_COLUMNS['dest_value'])


@app.route('/merge', methods=['POST'])
def merge_uploads():
    """Handle file uploads and run the merge."""
    upload_folder = app.config['UPLOAD_FOLDER']
    uploads = {role: request.files.get(role) for role in ('dst', 'src', 'map')}

    missing = [role for role, f in uploads.items() if f is None or not f.filename]
    if missing:
        return jsonify({'error': f"Please upload all three files (missing: {', '.join(missing)})"}), 400

    # Clear previous uploads
    for filename in os.listdir(upload_folder):
        filepath = os.path.join(upload_folder, filename)
        if os.path.isfile(filepath):
            os.unlink(filepath)

    paths = {}
    for role, file in uploads.items():
        filename = secure_filename(file.filename) or 'upload.csv'
        filepath = os.path.join(upload_folder, f'{role}_{filename}')
        file.save(filepath)
        paths[role] = filepath

    fragments = dict(DEFAULT_COLUMNS)
    column = request.form.get('column', '').strip()
    if column:
        fragments['dest_value'] = column

    output_name = updated_filename(secure_filename(uploads['dst'].filename) or 'upload.csv').name
    output_path = os.path.join(upload_folder, output_name)

    result = merge_files(paths['dst'], paths['src'], paths['map'], output_path, fragments=fragments)

    if not result.ok:
        return jsonify({'error': str(result.error), 'reason': result.reason}), 422

    return jsonify({
        'success': True,
        'updated': result.updated,
        'skipped': result.skipped,
        'output': output_name,
    })


@app.route('/download/<filename>')
def download_file(filename):
    """Download a merged file."""
    filepath = os.path.join(app.config['UPLOAD_FOLDER'], secure_filename(filename))
    if filename.endswith('-updated.csv') and os.path.exists(filepath):
        return send_file(filepath, as_attachment=True, download_name=Path(filepath).name)
    return jsonify({'error': 'File not found'}), 404


# HTML Template
HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Score Merger</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #f4f5fb;
            padding: 2rem;
        }

        .container {
            max-width: 720px;
            margin: 0 auto;
            background: white;
            border-radius: 1rem;
            box-shadow: 0 10px 30px rgba(0,0,0,0.15);
            padding: 2rem;
        }

        label {
            display: block;
            margin: 1rem 0 0.25rem;
            font-weight: 600;
            color: #333;
        }

        button {
            margin-top: 1.5rem;
            padding: 0.75rem 2rem;
            border: none;
            border-radius: 0.5rem;
            background: #667eea;
            color: white;
            font-weight: 600;
            cursor: pointer;
        }

        .error { color: #c0392b; margin-top: 1rem; }
        .success { color: #27ae60; margin-top: 1rem; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Score Merger</h1>
        <p>Copy maketest scores into a Canvas gradebook export using a GitHub ID to SIS Login ID map.</p>

        <form id="merge-form">
            <label for="dst">Gradebook export (Canvas CSV)</label>
            <input type="file" id="dst" name="dst" accept=".csv">

            <label for="src">Scores (maketest CSV)</label>
            <input type="file" id="src" name="src" accept=".csv">

            <label for="map">Mapping (GitHub ID to SIS Login ID)</label>
            <input type="file" id="map" name="map" accept=".csv">

            <label for="column">Gradebook column</label>
            <input type="text" id="column" name="column" value="{{ default_column }}">

            <button type="submit">Merge</button>
        </form>

        <div id="results"></div>
    </div>

    <script>
        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = String(text);
            return div.innerHTML;
        }

        document.getElementById('merge-form').addEventListener('submit', async (event) => {
            event.preventDefault();
            const resultsDiv = document.getElementById('results');
            const response = await fetch('/merge', {
                method: 'POST',
                body: new FormData(event.target),
            });
            const data = await response.json();

            if (!response.ok) {
                resultsDiv.innerHTML = `<div class="error">${escapeHtml(data.error)}</div>`;
                return;
            }

            const output = escapeHtml(data.output);
            let html = `<div class="success">Updated ${escapeHtml(data.updated)} cells.</div>`;
            if (data.skipped.length > 0) {
                html += `<p>No SIS Login ID for: ${data.skipped.map(escapeHtml).join(', ')}</p>`;
            }
            html += `<p><a href="/download/${encodeURIComponent(data.output)}">Download ${output}</a></p>`;
            resultsDiv.innerHTML = html;
        });
    </script>
</body>
</html>
'''


if __name__ == '__main__':
    print("Score Merger Web App")
    print("=" * 60)
    print("Starting server at http://localhost:5000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    app.run(debug=True, port=5000)
