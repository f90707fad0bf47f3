"""Development entry point: ``python app.py`` or ``flask --app app run``."""

from giftshop import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
