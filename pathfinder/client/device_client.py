"""
Example device client for the Pathfinder API
Simulates a sensor that checks in and posts temperature, humidity and location
"""

import asyncio
import random
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from pathfinder.core.config import settings
from pathfinder.core.logs import configure_logging

logger = structlog.get_logger(__name__)

BASE_LATITUDE = 37.7749
BASE_LONGITUDE = -122.4194


class DeviceClientError(Exception):
    """Raised when the API rejects a device request"""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class DeviceClient:
    """Talks to the API as a single device, authenticated by its API key"""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        check_in_interval: int = 60,
        data_interval: int = 30,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.check_in_interval = check_in_interval
        self.data_interval = data_interval
        self.session = session
        self.running = False
        self._task: Optional[asyncio.Future] = None

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "x-api-key": self.api_key}

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self.session.post(f"{self.api_url}{path}", json=payload, headers=self.headers) as response:
            try:
                body = await response.json(content_type=None)
            except ValueError as e:
                raise DeviceClientError(response.status, "response was not valid JSON") from e
            if response.status >= 400:
                message = body.get("message", "request failed") if isinstance(body, dict) else "request failed"
                raise DeviceClientError(response.status, message)
            return body

    async def check_in(self) -> Dict[str, Any]:
        """Report liveness without sending data"""
        return await self._post("/devices/check-in", {})

    async def submit(
        self,
        data_type: str,
        value: Any,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Send a single reading"""
        payload = {"dataType": data_type, "value": value}
        if latitude is not None and longitude is not None:
            payload.update(latitude=latitude, longitude=longitude)
        return await self._post("/device-data/submit", payload)

    async def batch_submit(self, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Send several readings in one request"""
        return await self._post("/device-data/batch-submit", {"dataEntries": entries})

    @staticmethod
    def read_temperature() -> float:
        """Temperature between 18 and 28 degrees C"""
        return round(random.uniform(18, 28), 1)

    @staticmethod
    def read_humidity() -> float:
        """Relative humidity between 30% and 70%"""
        return round(random.uniform(30, 70), 1)

    @staticmethod
    def read_location() -> Dict[str, float]:
        """A point within roughly 1km of the base coordinates"""
        return {
            "latitude": BASE_LATITUDE + (random.random() - 0.5) * 0.01,
            "longitude": BASE_LONGITUDE + (random.random() - 0.5) * 0.01,
        }

    async def send_readings(self) -> None:
        """Send one temperature, humidity and location reading"""
        location = self.read_location()
        temperature = self.read_temperature()
        humidity = self.read_humidity()

        await self.submit("temperature", temperature, **location)
        await self.submit("humidity", humidity, **location)
        await self.submit("location", location, **location)
        logger.info("Readings sent", temperature=temperature, humidity=humidity)

    async def _check_in_loop(self):
        while self.running:
            try:
                await self.check_in()
                logger.info("Check-in successful")
            except (aiohttp.ClientError, DeviceClientError) as e:
                logger.error("Check-in failed", error=str(e))
            await asyncio.sleep(self.check_in_interval)

    async def _data_loop(self):
        while self.running:
            try:
                await self.send_readings()
            except (aiohttp.ClientError, DeviceClientError) as e:
                logger.error("Sending readings failed", error=str(e))
            await asyncio.sleep(self.data_interval)

    async def start(self):
        """Run both loops until stopped"""
        self.running = True
        logger.info("Starting device client", api_url=self.api_url)

        async with aiohttp.ClientSession() as session:
            self.session = session
            self._task = asyncio.gather(self._check_in_loop(), self._data_loop())
            try:
                await self._task
            except asyncio.CancelledError:
                # stop() cancels the loops; anything else is a real cancellation
                if self.running:
                    raise
            finally:
                self._task = None

    async def stop(self):
        """Stop the device client, interrupting any pending sleep"""
        self.running = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.info("Device client stopped")


async def main():
    """Main entry point for the device client"""
    configure_logging(settings.log_level)
    if not settings.device_api_key:
        logger.error("DEVICE_API_KEY is not set")
        return

    client = DeviceClient(
        settings.device_api_url,
        settings.device_api_key,
        check_in_interval=settings.device_check_in_interval,
        data_interval=settings.device_data_interval,
    )
    try:
        await client.start()
    finally:
        await client.stop()

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")

if __name__ == "__main__":
    run()
