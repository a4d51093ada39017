CHOOSE_RANGE = "Report period:"
CHART_CAPTION = "Hours per day"
