#!/usr/bin/env python3
"""
Entry point for the Storefront Tournament Proxy.

Usage:
    python run.py                    # Run the proxy service

Environment Variables:
    FLASK_ENV: development, production or testing (default: development)
    PORT: Port to run on (default: 5000)
    APP_PROXY_SECRET: Shared secret used to verify app proxy signatures
    DATABASE_URL: SQLAlchemy database URL
"""
import os
import logging


def run_proxy():
    """Run the app proxy service."""
    from storefront_proxy.app import create_app
    
    env = os.getenv('FLASK_ENV', 'development')
    logging.basicConfig(
        level=logging.DEBUG if env == 'development' else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    
    app = create_app(env)
    port = int(os.getenv('PORT', 5000))
    debug = env == 'development'
    
    print(f"Starting Storefront Proxy on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=debug)


if __name__ == '__main__':
    run_proxy()
