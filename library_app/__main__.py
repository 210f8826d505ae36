from library_app.main import app

app(prog_name="library-app")
