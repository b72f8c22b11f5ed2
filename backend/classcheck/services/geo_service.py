# ===================================
# backend/classcheck/services/geo_service.py
"""Great-circle distance used by the proximity gate and distance readouts."""
import math

class GeoService:
    """Haversine distance between latitude/longitude points."""
    
    EARTH_RADIUS_METERS = 6371000
    FEET_PER_METER = 3.28084
    
    @staticmethod
    def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate distance between two GPS points in meters."""
        R = GeoService.EARTH_RADIUS_METERS
        
        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)
        
        a = (math.sin(delta_lat/2) ** 2 + 
             math.cos(lat1_rad) * math.cos(lat2_rad) * 
             math.sin(delta_lon/2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))
        
        return R * c
    
    @staticmethod
    def distance_feet(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate distance between two GPS points in feet."""
        return GeoService.distance_meters(lat1, lon1, lat2, lon2) * GeoService.FEET_PER_METER
