import logging

import uvicorn
from trip.api.api_run import create_app
from trip.utilities.config import APP_HOST, APP_PORT, DEBUG
from trip.utilities.network import announce_urls


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO)
    app = create_app()
    local_url, *lan_urls = announce_urls(APP_HOST, APP_PORT)
    print(f"Uvicorn running on {local_url} (Press CTRL+C to quit)")
    for url in lan_urls:
        print(f"Accessible from other devices at: {url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
