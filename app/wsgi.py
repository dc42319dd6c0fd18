from app.customerdb import create_app

app = create_app()
