import os

from . import create_app

if __name__ == '__main__':
    # Development server only; use a real WSGI server (gunicorn/uWSGI) in production
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
