"""
Services package for the Context Graph Engine.

Consumer-side frame pipeline around the engine:
- Sensor smoothing: per-sensor moving average before injection
- Activation history: randomly sub-sampled snapshots for charts
- Engine session: thread-safe inject → step → query driver used by the web server
"""
