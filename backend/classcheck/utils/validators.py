"""Validation utilities for request payloads."""
from typing import Any, Dict, List, Optional


class ValidationError(Exception):
    """Custom validation error."""
    pass


class Validator:
    """Validation helper class."""
    
    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict[str, Any]:
        """Validate required fields in data."""
        errors = []
        
        for field in required_fields:
            if field not in data or data[field] is None or data[field] == '':
                errors.append(f"{field} is required")
        
        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
    
    @staticmethod
    def validate_text_fields(data: Dict, fields: List[str]) -> Dict[str, Any]:
        """Fields that are present must be strings."""
        errors = [
            f"{field} must be a string"
            for field in fields
            if data.get(field) is not None and not isinstance(data[field], str)
        ]
        
        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
    
    @staticmethod
    def validate_coordinates(latitude: Any, longitude: Any) -> Dict[str, Any]:
        """Validate a latitude/longitude pair."""
        errors = []
        
        try:
            lat = float(latitude)
            lon = float(longitude)
        except (TypeError, ValueError):
            return {"is_valid": False, "errors": ["latitude and longitude must be numbers"]}
        
        if not -90.0 <= lat <= 90.0:
            errors.append("latitude must be between -90 and 90")
        if not -180.0 <= lon <= 180.0:
            errors.append("longitude must be between -180 and 180")
        
        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
    
    @staticmethod
    def parse_location(data: Optional[Dict]) -> tuple:
        """Pull a validated (latitude, longitude) pair out of a payload."""
        data = data or {}
        required = Validator.validate_required_fields(data, ['latitude', 'longitude'])
        if not required['is_valid']:
            raise ValidationError('; '.join(required['errors']))
        
        coords = Validator.validate_coordinates(data['latitude'], data['longitude'])
        if not coords['is_valid']:
            raise ValidationError('; '.join(coords['errors']))
        
        return float(data['latitude']), float(data['longitude'])
    
    @staticmethod
    def parse_optional_anchor(data: Dict) -> Dict[str, Optional[float]]:
        """Read an optional geo-anchor; both halves or neither."""
        lat = data.get('latitude')
        lon = data.get('longitude')
        
        if lat is None and lon is None:
            return {'latitude': None, 'longitude': None}
        if lat is None or lon is None:
            raise ValidationError("latitude and longitude must be given together")
        
        coords = Validator.validate_coordinates(lat, lon)
        if not coords['is_valid']:
            raise ValidationError('; '.join(coords['errors']))
        
        return {'latitude': float(lat), 'longitude': float(lon)}
