# Models package
from .user import User
from .device import Device, DeviceStatus
from .device_data import DeviceData
from .diary_entry import DiaryEntry
from .connection import Connection

__all__ = ['User', 'Device', 'DeviceStatus', 'DeviceData', 'DiaryEntry', 'Connection']
