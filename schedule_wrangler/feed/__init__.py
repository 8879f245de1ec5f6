"""Gtfs transit feed module for Schedule Wrangler."""

from .feed import Feed
from .patterns import *
from .stop_times import *
from .trips import *
