"""covid_dashboard package initializer.

This package contains the data layer behind the world COVID-19
dashboard.  Modules cover downloading the OWID dataset, cleaning and
filtering it, holding the load-once table and turning selector values
into chart-ready tables.  See individual module docstrings for details.
"""
