from rattery import create_app

app = create_app()

if __name__ == "__main__":
    # To run the development server: python main.py
    app.run(debug=True)
