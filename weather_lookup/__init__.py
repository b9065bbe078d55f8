"""Weather lookup: current conditions, daily forecast and recent searches from OpenWeatherMap."""
