"""
CartPoints entry point.

    gunicorn -c gunicorn.conf.py run:app     # production
    python run.py                            # local development
"""
import os
import sys
import logging

logger = logging.getLogger('cartpoints.run')

config_name = os.getenv('FLASK_ENV', 'production')

try:
    from cartpoints import create_app
    app = create_app(config_name)
    logger.info(f"Routes: {len(list(app.url_map.iter_rules()))}")
except Exception as e:
    logger.exception(f"FATAL ERROR during app creation: {e}")
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 3000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )
