"""
Stormwatch Monitoring Core.

Components:
- idf: IDF threshold table (return period → intensity)
- window: per-station reading buffer (dedup, pruning, ordering)
- classifier: latest reading → StormStatus
- state_machine: per-station monitoring/debounce policy
- dispatcher: fan-out of alerts to notification integrations
- integrations: e-mail, webhook and log-only channels
- store: station-keyed windows, monitor states and locks
- service: ingest / query_status façade
"""
