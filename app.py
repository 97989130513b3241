"""WSGI entry point: ``flask run`` / ``flask sweep-absences`` pick this up."""

from timeclock.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
