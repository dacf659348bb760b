"""
WSGI entry point for the academic administration app.

For gunicorn: wsgi:app
"""

from academic_admin import app

if __name__ == "__main__":
    app.run()
