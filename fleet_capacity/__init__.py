"""
FLEET CAPACITY ANALYSIS
=======================
Hệ thống phân tích capacity cho các server groups dựa trên
metrics vận hành (request rate, CPU cores, EC2 CPU, RDS CPU).

Modules:
- data: Metric source, time-bucket aggregator, series aligner
- models: Linear regression và descriptive statistics
- autoscaling: Capacity classifier, fleet discovery
- pipeline: Phân tích từng resource và batch song song
- reporting: Report assembler, renderers, upload/notify
"""

__version__ = "1.0.0"
