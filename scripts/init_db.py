#!/usr/bin/env python3
"""
Initialize the database with a demo user, a device and a day of readings
"""

import os
import random
import sys
from datetime import date, timedelta

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy.orm import sessionmaker

from pathfinder.core.clock import utcnow
from pathfinder.core.security import generate_api_key, hash_password
from pathfinder.database.connection import engine, init_database
from pathfinder.models import Device, DeviceData, DeviceStatus, User

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "pathfinder-demo"

def create_sample_data(bind=None):
    """Create sample data for local development"""

    bind = bind or engine
    init_database(bind)

    Session = sessionmaker(bind=bind)
    session = Session()

    try:
        user = session.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            user = User(
                name="Demo User",
                email=DEMO_EMAIL,
                password_hash=hash_password(DEMO_PASSWORD),
                date_of_birth=date(1990, 1, 1),
            )
            session.add(user)
            session.commit()
            print(f"✅ Demo user created ({DEMO_EMAIL} / {DEMO_PASSWORD})")

        device = session.query(Device).filter(Device.device_id == "sensor-1").first()
        if not device:
            device = Device(
                device_id="sensor-1",
                name="Living Room Sensor",
                device_type="environment",
                status=DeviceStatus.OFFLINE.value,
                api_key=generate_api_key(),
                user_id=user.id,
            )
            session.add(device)
            session.commit()
            print("✅ Demo device created")
            print(f"   API key (store it now, it is not shown again): {device.api_key}")

            # Readings for the last 24 hours, every 30 minutes
            now = utcnow()
            readings = []
            for i in range(48):
                timestamp = now - timedelta(minutes=i * 30)
                readings.append(DeviceData(
                    device_id=device.id,
                    timestamp=timestamp,
                    data_type="temperature",
                    value=round(random.uniform(18, 28), 1),
                ))
                readings.append(DeviceData(
                    device_id=device.id,
                    timestamp=timestamp,
                    data_type="humidity",
                    value=round(random.uniform(30, 70), 1),
                ))
            session.add_all(readings)
            session.commit()
            print(f"✅ {len(readings)} sample readings created")

        print("\n🎉 Database initialization complete!")

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        session.rollback()
        raise
    finally:
        session.close()

if __name__ == "__main__":
    create_sample_data()
