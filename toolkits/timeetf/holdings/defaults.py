"""Defaults for the TIME ETF holdings build."""

FUNDS = [
    "TIME 글로벌탑픽액티브",
    "TIME K신재생에너지액티브",
    "TIME 글로벌바이오액티브",
    "TIME 글로벌우주테크&방산액티브",
    "TIME 미국S&P500액티브",
    "TIME K바이오액티브",
    "TIME 차이나AI테크액티브",
    "TIME 글로벌AI인공지능액티브",
    "TIME Korea플러스배당액티브",
    "TIME 미국나스닥100액티브",
    "TIME 미국배당다우존스액티브",
    "TIME 미국나스닥100채권혼합50액티브",
    "TIME 코스피액티브",
    "TIME 글로벌소비트렌드액티브",
    "TIME 코리아밸류업액티브",
    "TIME K이노베이션액티브",
    "TIME K컬처액티브",
]

# Display groups: overseas strategies first, domestic second.
FUND_GROUP_A = [
    "TIME 글로벌탑픽액티브",
    "TIME 글로벌바이오액티브",
    "TIME 글로벌우주테크&방산액티브",
    "TIME 미국S&P500액티브",
    "TIME 차이나AI테크액티브",
    "TIME 글로벌AI인공지능액티브",
    "TIME 미국나스닥100액티브",
    "TIME 미국배당다우존스액티브",
    "TIME 미국나스닥100채권혼합50액티브",
    "TIME 글로벌소비트렌드액티브",
]

FUND_GROUP_B = [
    "TIME K신재생에너지액티브",
    "TIME K바이오액티브",
    "TIME Korea플러스배당액티브",
    "TIME 코스피액티브",
    "TIME 코리아밸류업액티브",
    "TIME K이노베이션액티브",
    "TIME K컬처액티브",
]

DEFAULT_WEIGHT_THRESHOLD = 0.5
DEFAULT_SHARES_THRESHOLD = 10
DEFAULT_HISTORY_KEEP_DAYS = 120
DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_HISTORY_DIR = "data/history"
DEFAULT_OUTPUT_DIR = "data/latest"
