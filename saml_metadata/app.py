from flask import Flask
from .config import config
import logging

def create_app(config_name='default'):
    """Application factory function"""
    app = Flask(__name__)
    
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    
    # Load configuration
    app.config.from_object(config[config_name])
    
    try:
        # Register blueprints
        from .views.metadata import metadata_bp
        
        app.register_blueprint(metadata_bp, url_prefix='/metadata')
        
        @app.route('/health')
        def health():
            return {'status': 'ok'}
        
        app.logger.info("Application initialized successfully")
        return app
        
    except Exception as e:
        app.logger.error(f"Failed to initialize application: {str(e)}")
        raise
