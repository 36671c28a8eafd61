# resort-web app.py
from resort_web import create_app

app = create_app()

if __name__ == '__main__':
    app.run(port=3000, debug=True)
