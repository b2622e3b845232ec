import os
from flask import Flask
from dotenv import load_dotenv

load_dotenv()

def create_app(test_config=None):
    app = Flask(__name__)

    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024
    app.config['RATTERY_DATA_FILE'] = os.environ.get('RATTERY_DATA_FILE')
    app.config['PEDIGREE_GENERATIONS'] = int(os.environ.get('PEDIGREE_GENERATIONS', 5))
    app.config['MAX_PEDIGREE_GENERATIONS'] = int(os.environ.get('MAX_PEDIGREE_GENERATIONS', 10))

    if test_config:
        app.config.update(test_config)

    # Record storage, shared by all requests of this app
    from .repository import RatteryRepository
    app.repository = RatteryRepository(app.config['RATTERY_DATA_FILE'])

    # Register blueprints
    from .routes import main_blueprint
    app.register_blueprint(main_blueprint)

    return app
