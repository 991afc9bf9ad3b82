"""
Language Packs

Static keyword tables for the nine supported languages. Each pack maps
phrases to intents, data types, activities, health metrics, aggregation
operations and relative-time periods. Packs are independent: the analyzer
and the temporal parser evaluate every pack against every question, so a
question that mixes scripts is still understood.

Latin-script entries carry word boundaries; CJK and Hangul entries are
plain substrings because those scripts do not separate words with spaces.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from ..common.schemas.query import AggregationOp, DataType

# Period keys in parse priority order: day > week > month > year
TEMPORAL_PERIODS = (
    "day_before_yesterday",
    "today",
    "yesterday",
    "this_week",
    "last_week",
    "this_month",
    "last_month",
    "this_year",
    "last_year",
)

# "Previous" periods and the current period they are compared against
PERIOD_COUNTERPARTS = {
    "yesterday": "today",
    "last_week": "this_week",
    "last_month": "this_month",
    "last_year": "this_year",
}

# Data-type keyword precedence when several types are mentioned
DATA_TYPE_PRECEDENCE = (
    DataType.PHOTO,
    DataType.VOICE,
    DataType.HEALTH,
    DataType.TEXT,
    DataType.LOCATION,
    DataType.EVENT,
)

# Aggregation keyword precedence
AGGREGATION_PRECEDENCE = (
    AggregationOp.AVG,
    AggregationOp.MAX,
    AggregationOp.MIN,
    AggregationOp.SUM,
)

ACTIVITIES = ("badminton", "gym", "running", "swimming", "yoga", "cycling", "restaurant")

HEALTH_METRICS = ("steps", "heart_rate", "sleep")


def _rx(*alternatives: str) -> Optional[Pattern]:
    """Compile alternatives into one case-insensitive pattern"""
    if not alternatives:
        return None
    return re.compile("|".join(f"(?:{a})" for a in alternatives), re.IGNORECASE)


def _rx_map(table: Dict) -> Dict:
    return {key: _rx(*alts) for key, alts in table.items() if alts}


@dataclass(frozen=True)
class LanguagePack:
    """Compiled keyword tables for one language"""
    code: str
    count: Optional[Pattern] = None
    comparison: Optional[Pattern] = None
    pattern: Optional[Pattern] = None
    correlation: Optional[Pattern] = None
    aggregation: Dict[AggregationOp, Pattern] = field(default_factory=dict)
    data_types: Dict[DataType, Pattern] = field(default_factory=dict)
    activities: Dict[str, Pattern] = field(default_factory=dict)
    metrics: Dict[str, Pattern] = field(default_factory=dict)
    periods: Dict[str, Pattern] = field(default_factory=dict)
    days_ago: Tuple[Pattern, ...] = ()  # group 1 is the number of days
    weeks_ago: Tuple[Pattern, ...] = ()  # group 1 is the number of weeks


def _pack(
    code: str,
    count: Tuple[str, ...],
    comparison: Tuple[str, ...],
    pattern: Tuple[str, ...],
    correlation: Tuple[str, ...],
    aggregation: Dict[AggregationOp, Tuple[str, ...]],
    data_types: Dict[DataType, Tuple[str, ...]],
    activities: Dict[str, Tuple[str, ...]],
    metrics: Dict[str, Tuple[str, ...]],
    periods: Dict[str, Tuple[str, ...]],
    days_ago: Tuple[str, ...],
    weeks_ago: Tuple[str, ...],
) -> LanguagePack:
    return LanguagePack(
        code=code,
        count=_rx(*count),
        comparison=_rx(*comparison),
        pattern=_rx(*pattern),
        correlation=_rx(*correlation),
        aggregation=_rx_map(aggregation),
        data_types=_rx_map(data_types),
        activities=_rx_map(activities),
        metrics=_rx_map(metrics),
        periods=_rx_map(periods),
        days_ago=tuple(re.compile(p, re.IGNORECASE) for p in days_ago),
        weeks_ago=tuple(re.compile(p, re.IGNORECASE) for p in weeks_ago),
    )


ENGLISH = _pack(
    "en",
    count=(r"\bhow many\b", r"\bnumber of\b", r"\bcount\b", r"\bhow often\b"),
    comparison=(
        r"\bcompare[ds]?\b", r"\bcomparing\b", r"\bversus\b", r"\bvs\b\.?",
        r"\b(?:more|less|fewer)\b.{0,40}\bthan\b", r"\bdifference between\b",
    ),
    pattern=(
        r"\busually\b", r"\btypically\b", r"\btend to\b", r"\bmost often\b",
        r"\bwhat time (?:do|did) i\b", r"\bwhich days?\b", r"\broutine\b",
        r"\bhabits?\b", r"\bpatterns?\b",
    ),
    correlation=(r"\bcorrelat\w*", r"\brelationship between\b"),
    aggregation={
        AggregationOp.AVG: (
            r"\baverage\b",
            r"\bmean\s+(?:number|value|amount|count|steps|heart ?rate|sleep|duration)\b",
            r"\bper day\b",
        ),
        AggregationOp.MAX: (r"\bmax(?:imum)?\b", r"\bhighest\b"),
        AggregationOp.MIN: (r"\bmin(?:imum)?\b", r"\blowest\b"),
        AggregationOp.SUM: (r"\btotal\b", r"\bsum\b", r"\bhow much\b", r"\baltogether\b"),
    },
    data_types={
        DataType.PHOTO: (r"\bphotos?\b", r"\bpictures?\b", r"\bimages?\b", r"\bpics?\b"),
        DataType.VOICE: (r"\bvoice\b", r"\baudio\b", r"\brecordings?\b", r"\bvoice memos?\b"),
        DataType.HEALTH: (
            r"\bsteps?\b", r"\bwalk(?:ed|ing)?\b", r"\bheart\b", r"\bsleep\w*",
            r"\bworkouts?\b", r"\bexercis\w*", r"\bfitness\b", r"\bhealth\b",
        ),
        DataType.TEXT: (r"\bnotes?\b", r"\bjournal\w*", r"\bdiary\b", r"\bdiaries\b", r"\bwrote\b"),
        DataType.LOCATION: (
            r"\blocations?\b", r"\bplaces?\b", r"\bwhere\b", r"\bvisit\w*", r"\bbeen to\b",
        ),
        DataType.EVENT: (
            r"\bevents?\b", r"\bmeetings?\b", r"\bappointments?\b", r"\bcalendar\b",
        ),
    },
    activities={
        "badminton": (r"\bbadminton\b",),
        "gym": (r"\bgym\b",),
        "running": (r"\brunning\b", r"\bjogging\b", r"\bwent for a run\b"),
        "swimming": (r"\bswimming\b", r"\bswim\b", r"\bswam\b"),
        "yoga": (r"\byoga\b",),
        "cycling": (r"\bcycling\b", r"\bbike rides?\b", r"\bbiking\b"),
        "restaurant": (r"\brestaurants?\b", r"\bate out\b", r"\beating out\b"),
    },
    metrics={
        "steps": (r"\bsteps?\b",),
        "heart_rate": (r"\bheart ?rate\b", r"\bpulse\b", r"\bbpm\b"),
        "sleep": (r"\bsleep\w*", r"\bslept\b"),
    },
    periods={
        "day_before_yesterday": (r"\bday before yesterday\b",),
        "today": (r"\btoday\b",),
        "yesterday": (r"\byesterday\b",),
        "this_week": (r"\bthis week\b",),
        "last_week": (r"\blast week\b", r"\bprevious week\b"),
        "this_month": (r"\bthis month\b",),
        "last_month": (r"\blast month\b", r"\bprevious month\b"),
        "this_year": (r"\bthis year\b",),
        "last_year": (r"\blast year\b", r"\bprevious year\b"),
    },
    days_ago=(r"\b(\d+)\s+days?\s+ago\b",),
    weeks_ago=(r"\b(\d+)\s+weeks?\s+ago\b",),
)

CHINESE = _pack(
    "zh",
    count=("几个", "几次", "几张", "几条", "多少个", "多少次", "多少张", "多少条", "有几", "数量", "统计"),
    comparison=("比较", "对比", "相比", "超过", "少于", "比.{0,12}多", "比.{0,12}少"),
    pattern=("通常", "一般", "经常", "习惯", "规律", "什么时候"),
    correlation=("相关性", "关联"),
    aggregation={
        AggregationOp.AVG: ("平均", "均值"),
        AggregationOp.MAX: ("最多", "最高", "最大"),
        AggregationOp.MIN: ("最少", "最低", "最小"),
        AggregationOp.SUM: ("总共", "总计", "一共", "合计", "总数", "多少步"),
    },
    data_types={
        DataType.PHOTO: ("照片", "图片", "相片", "拍照", "拍了"),
        DataType.VOICE: ("语音", "录音", "音频"),
        DataType.HEALTH: ("步数", "走路", "心率", "睡眠", "运动", "健身", "锻炼", "健康"),
        DataType.TEXT: ("笔记", "日记", "文字"),
        DataType.LOCATION: ("位置", "地点", "地方", "去了", "到过", "去过"),
        DataType.EVENT: ("日程", "会议", "约会", "日历"),
    },
    activities={
        "badminton": ("羽毛球",),
        "gym": ("健身房",),
        "running": ("跑步",),
        "swimming": ("游泳",),
        "yoga": ("瑜伽",),
        "cycling": ("骑行", "骑车"),
        "restaurant": ("餐厅", "饭店", "餐馆"),
    },
    metrics={
        "steps": ("步数", "多少步"),
        "heart_rate": ("心率", "心跳"),
        "sleep": ("睡眠", "睡了"),
    },
    periods={
        "day_before_yesterday": ("前天",),
        "today": ("今天",),
        "yesterday": ("昨天",),
        "this_week": ("这周", "本周", "这个星期", "这星期"),
        "last_week": ("上周", "上星期", "上个星期"),
        "this_month": ("这个月", "本月"),
        "last_month": ("上个月", "上月"),
        "this_year": ("今年",),
        "last_year": ("去年",),
    },
    days_ago=(r"(\d+)\s*天前",),
    weeks_ago=(r"(\d+)\s*(?:周|个星期|星期)前",),
)

JAPANESE = _pack(
    "ja",
    count=("いくつ", "何個", "何回", "何度", "何枚", "何件", "回数"),
    comparison=("比較", "比べ", "より多", "より少"),
    pattern=("普段", "いつも", "たいてい", "傾向", "パターン", "何時に", "何曜日"),
    correlation=("相関",),
    aggregation={
        AggregationOp.AVG: ("平均",),
        AggregationOp.MAX: ("最大", "最高", "最多"),
        AggregationOp.MIN: ("最小", "最低", "最少"),
        AggregationOp.SUM: ("合計", "トータル", "全部で"),
    },
    data_types={
        DataType.PHOTO: ("写真", "画像", "フォト"),
        DataType.VOICE: ("音声", "ボイス", "録音"),
        DataType.HEALTH: ("歩数", "睡眠", "運動", "心拍", "ヘルス", "トレーニング", "健康"),
        DataType.TEXT: ("日記", "ノート", "メモ"),
        DataType.LOCATION: ("場所", "訪問", "どこ", "行った"),
        DataType.EVENT: ("予定", "会議", "イベント", "カレンダー"),
    },
    activities={
        "badminton": ("バドミントン",),
        "gym": ("ジム",),
        "running": ("ランニング", "ジョギング"),
        "swimming": ("水泳", "プール"),
        "yoga": ("ヨガ",),
        "cycling": ("サイクリング", "自転車"),
        "restaurant": ("レストラン", "外食"),
    },
    metrics={
        "steps": ("歩数", "何歩"),
        "heart_rate": ("心拍",),
        "sleep": ("睡眠", "寝た"),
    },
    periods={
        "day_before_yesterday": ("一昨日", "おととい"),
        "today": ("今日",),
        "yesterday": ("昨日",),
        "this_week": ("今週",),
        "last_week": ("先週",),
        "this_month": ("今月",),
        "last_month": ("先月",),
        "this_year": ("今年",),
        "last_year": ("昨年", "去年"),
    },
    days_ago=(r"(\d+)\s*日前",),
    weeks_ago=(r"(\d+)\s*週間前",),
)

KOREAN = _pack(
    "ko",
    count=(r"몇\s?개", r"몇\s?번", r"몇\s?장", r"몇\s?건", "횟수", r"얼마나\s?자주"),
    comparison=("비교", r"보다\s?많", r"보다\s?적"),
    pattern=("보통", "주로", "대개", "패턴", r"몇\s?시에", "무슨 요일"),
    correlation=("상관",),
    aggregation={
        AggregationOp.AVG: ("평균",),
        AggregationOp.MAX: ("최대", "최고", "가장 많"),
        AggregationOp.MIN: ("최소", "최저", "가장 적"),
        AggregationOp.SUM: ("합계", "총"),
    },
    data_types={
        DataType.PHOTO: ("사진", "이미지"),
        DataType.VOICE: ("음성", "녹음", "오디오"),
        DataType.HEALTH: ("걸음", "수면", "운동", "심박", "건강", "트레이닝"),
        DataType.TEXT: ("일기", "메모", "노트"),
        DataType.LOCATION: ("장소", "위치", "방문", "어디"),
        DataType.EVENT: ("일정", "회의", "약속", "이벤트", "캘린더"),
    },
    activities={
        "badminton": ("배드민턴",),
        "gym": ("헬스장", "체육관"),
        "running": ("달리기", "러닝", "조깅"),
        "swimming": ("수영",),
        "yoga": ("요가",),
        "cycling": ("자전거", "사이클"),
        "restaurant": ("식당", "레스토랑"),
    },
    metrics={
        "steps": ("걸음",),
        "heart_rate": ("심박",),
        "sleep": ("수면", "잠을"),
    },
    periods={
        "day_before_yesterday": ("그저께", "그제"),
        "today": ("오늘",),
        "yesterday": ("어제",),
        "this_week": (r"이번\s*주",),
        "last_week": (r"지난\s*주",),
        "this_month": (r"이번\s*달",),
        "last_month": (r"지난\s*달",),
        "this_year": ("올해",),
        "last_year": ("작년",),
    },
    days_ago=(r"(\d+)\s*일\s*전",),
    weeks_ago=(r"(\d+)\s*주\s*전",),
)

SPANISH = _pack(
    "es",
    count=(r"\bcuánt[oa]s\b", r"\bnúmero de\b", r"\bcantidad de\b", r"\bveces\b"),
    comparison=(r"\bcompar\w*", r"\bmás\b.{0,40}\bque\b", r"\bmenos\b.{0,40}\bque\b"),
    pattern=(
        r"\bnormalmente\b", r"\bgeneralmente\b", r"\bhabitualmente\b", r"\bsuel[oe]s?\b",
        r"\ba qué hora\b", r"\bqué días?\b", r"\bpatr[óo]n\b",
    ),
    correlation=(r"\bcorrelaci[óo]n\b",),
    aggregation={
        AggregationOp.AVG: (r"\bpromedio\b", r"\bla media de\b"),
        AggregationOp.MAX: (r"\bmáximo\b", r"\bmás alto\b"),
        AggregationOp.MIN: (r"\bmínimo\b", r"\bmás bajo\b"),
        AggregationOp.SUM: (r"\btotal\b", r"\bsuma\b", r"\bcuánt[oa]\b"),
    },
    data_types={
        DataType.PHOTO: (r"\bfotos?\b", r"\bfotografías?\b", r"\bimagen\b", r"\bimágenes\b"),
        DataType.VOICE: (r"\bvoz\b", r"\bgrabaci[óo]n\w*", r"\baudios?\b"),
        DataType.HEALTH: (
            r"\bpasos\b", r"\bsueño\b", r"\bejercicio\b", r"\britmo cardíaco\b",
            r"\bsalud\b", r"\bentren\w*",
        ),
        DataType.TEXT: (r"\bmi diario\b", r"\bentradas de diario\b", r"\bnotas?\b"),
        DataType.LOCATION: (r"\blugar(?:es)?\b", r"\bubicaci[óo]n\w*", r"\bvisit\w*", r"\bdónde\b"),
        DataType.EVENT: (r"\beventos?\b", r"\breuni[óo]n\w*", r"\bcitas?\b", r"\bcalendario\b"),
    },
    activities={
        "badminton": (r"\bbádminton\b",),
        "gym": (r"\bgimnasio\b",),
        "running": (r"\bcorrer\b", r"\bcorrí\b"),
        "swimming": (r"\bnataci[óo]n\b", r"\bnadar\b"),
        "yoga": (r"\byoga\b",),
        "cycling": (r"\bciclismo\b", r"\bbicicleta\b"),
        "restaurant": (r"\brestaurantes?\b",),
    },
    metrics={
        "steps": (r"\bpasos\b",),
        "heart_rate": (r"\britmo cardíaco\b", r"\bpulso\b"),
        "sleep": (r"\bsueño\b", r"\bdormí\b"),
    },
    periods={
        "day_before_yesterday": (r"\banteayer\b", r"\bantes de ayer\b"),
        "today": (r"\bhoy\b",),
        "yesterday": (r"\bayer\b",),
        "this_week": (r"\besta semana\b",),
        "last_week": (r"\bsemana pasada\b",),
        "this_month": (r"\beste mes\b",),
        "last_month": (r"\bmes pasado\b",),
        "this_year": (r"\beste año\b",),
        "last_year": (r"\baño pasado\b",),
    },
    days_ago=(r"\bhace\s+(\d+)\s+días?\b",),
    weeks_ago=(r"\bhace\s+(\d+)\s+semanas?\b",),
)

FRENCH = _pack(
    "fr",
    count=(r"\bcombien\b", r"\bnombre de\b", r"\bfois\b"),
    comparison=(r"\bcompar\w*", r"\bplus\b.{0,40}\bque\b", r"\bmoins\b.{0,40}\bque\b", r"\bpar rapport\b"),
    pattern=(
        r"\bd['’]habitude\b", r"\bhabituellement\b", r"\bgénéralement\b", r"\ben général\b",
        r"\bà quelle heure\b", r"\bquels? jours?\b", r"\btendance\b",
    ),
    correlation=(r"\bcorrélation\b",),
    aggregation={
        AggregationOp.AVG: (r"\bmoyenne\b",),
        AggregationOp.MAX: (r"\bmaximum\b", r"\ble plus élevé\b"),
        AggregationOp.MIN: (r"\bminimum\b", r"\ble plus bas\b"),
        AggregationOp.SUM: (r"\btotal\b", r"\bsomme\b", r"\bau total\b"),
    },
    data_types={
        DataType.PHOTO: (r"\bphotos?\b", r"\bimages?\b"),
        DataType.VOICE: (r"\bvocal\w*", r"\bvoix\b", r"\benregistrements?\b"),
        DataType.HEALTH: (
            r"\bde pas\b", r"\bsommeil\b", r"\bexercice\b", r"\brythme cardiaque\b",
            r"\bsanté\b", r"\bentraîn\w*",
        ),
        DataType.TEXT: (r"\bjournal\b", r"\bnotes?\b"),
        DataType.LOCATION: (r"\blieux?\b", r"\bendroits?\b", r"\bvisit\w*", r"\boù\b"),
        DataType.EVENT: (r"\bévénements?\b", r"\bréunions?\b", r"\brendez-vous\b", r"\bagenda\b"),
    },
    activities={
        "badminton": (r"\bbadminton\b",),
        "gym": (r"\bsalle de sport\b", r"\bsalle de gym\b"),
        "running": (r"\bcourse à pied\b", r"\bcourir\b", r"\bcouru\b"),
        "swimming": (r"\bnatation\b", r"\bnager\b", r"\bpiscine\b"),
        "yoga": (r"\byoga\b",),
        "cycling": (r"\bvélo\b", r"\bcyclisme\b"),
        "restaurant": (r"\brestaurants?\b",),
    },
    metrics={
        "steps": (r"\bde pas\b",),
        "heart_rate": (r"\brythme cardiaque\b", r"\bfréquence cardiaque\b"),
        "sleep": (r"\bsommeil\b", r"\bdormi\b"),
    },
    periods={
        "day_before_yesterday": (r"\bavant-hier\b",),
        "today": (r"\baujourd['’]hui\b",),
        "yesterday": (r"\bhier\b",),
        "this_week": (r"\bcette semaine\b",),
        "last_week": (r"\bsemaine dernière\b",),
        "this_month": (r"\bce mois(?:-ci)?\b",),
        "last_month": (r"\bmois dernier\b",),
        "this_year": (r"\bcette année\b",),
        "last_year": (r"\bannée dernière\b",),
    },
    days_ago=(r"\bil y a\s+(\d+)\s+jours?\b",),
    weeks_ago=(r"\bil y a\s+(\d+)\s+semaines?\b",),
)

GERMAN = _pack(
    "de",
    count=(r"\bwie viele\b", r"\bwieviele?\b", r"\bwie oft\b", r"\banzahl\b"),
    comparison=(r"\bvergleich\w*", r"\bmehr\b.{0,40}\bals\b", r"\bweniger\b.{0,40}\bals\b"),
    pattern=(
        r"\bnormalerweise\b", r"\bmeistens\b", r"\bgewöhnlich\b", r"\bum wie viel uhr\b",
        r"\ban welchen tagen\b", r"\bmuster\b",
    ),
    correlation=(r"\bkorrelation\b", r"\bzusammenhang\b"),
    aggregation={
        AggregationOp.AVG: (r"\bdurchschnitt\w*", r"\bmittelwert\b"),
        AggregationOp.MAX: (r"\bmaximum\b", r"\bhöchste\w*"),
        AggregationOp.MIN: (r"\bminimum\b", r"\bniedrigste\w*"),
        AggregationOp.SUM: (r"\binsgesamt\b", r"\bsumme\b", r"\bgesamt\w*"),
    },
    data_types={
        DataType.PHOTO: (r"\bfotos?\b", r"\bbild(?:er)?\b"),
        DataType.VOICE: (r"\bsprachnotiz\w*", r"\bsprachmemo\w*", r"\baufnahmen?\b", r"\baudio\b"),
        DataType.HEALTH: (
            r"\bschritte\b", r"\bschlaf\w*", r"\bübung\w*", r"\bherzfrequenz\b",
            r"\bgesundheit\b", r"\btrainiert\b", r"\btraining\b",
        ),
        DataType.TEXT: (r"\btagebuch\w*", r"\bnotiz(?:en)?\b"),
        DataType.LOCATION: (r"\borte?\b", r"\bstandort\w*", r"\bbesuch\w*", r"\bwo\b"),
        DataType.EVENT: (r"\btermin\w*", r"\bbesprechung\w*", r"\bveranstaltung\w*", r"\bkalender\b"),
    },
    activities={
        "badminton": (r"\bbadminton\b",),
        "gym": (r"\bfitnessstudio\b",),
        "running": (r"\blaufen\b", r"\bjoggen\b"),
        "swimming": (r"\bschwimm\w*",),
        "yoga": (r"\byoga\b",),
        "cycling": (r"\bradfahren\b", r"\bfahrrad\w*"),
        "restaurant": (r"\brestaurants?\b",),
    },
    metrics={
        "steps": (r"\bschritte\b",),
        "heart_rate": (r"\bherzfrequenz\b", r"\bpuls\b"),
        "sleep": (r"\bschlaf\w*", r"\bgeschlafen\b"),
    },
    periods={
        "day_before_yesterday": (r"\bvorgestern\b",),
        "today": (r"\bheute\b",),
        "yesterday": (r"\bgestern\b",),
        "this_week": (r"\bdiese[rn]? woche\b",),
        "last_week": (r"\bletzte[rn]? woche\b", r"\bvergangene[rn]? woche\b"),
        "this_month": (r"\bdiese[nmr]? monat\b",),
        "last_month": (r"\bletzte[nmr]? monat\b", r"\bvergangene[nmr]? monat\b"),
        "this_year": (r"\bdiese[sm] jahr\b",),
        "last_year": (r"\bletzte[sn]? jahr\b", r"\bvergangene[sn]? jahr\b"),
    },
    days_ago=(r"\bvor\s+(\d+)\s+tagen?\b",),
    weeks_ago=(r"\bvor\s+(\d+)\s+wochen?\b",),
)

ITALIAN = _pack(
    "it",
    count=(r"\bquant[ie]\b", r"\bnumero di\b", r"\bvolte\b"),
    comparison=(r"\bconfront\w*", r"\bpiù\b.{0,40}\bdi\b", r"\bmeno\b.{0,40}\bdi\b", r"\brispetto a\b"),
    pattern=(
        r"\bdi solito\b", r"\bsolitamente\b", r"\bgeneralmente\b", r"\ba che ora\b",
        r"\bquali giorni\b", r"\babitudin\w*",
    ),
    correlation=(r"\bcorrelazion\w*",),
    aggregation={
        AggregationOp.AVG: (r"\bla media d(?:i|ei|elle|el|egli)\b", r"\bmedio\b"),
        AggregationOp.MAX: (r"\bmassimo\b", r"\bpiù alto\b"),
        AggregationOp.MIN: (r"\bminimo\b", r"\bpiù basso\b"),
        AggregationOp.SUM: (r"\btotale\b", r"\bsomma\b", r"\bin tutto\b", r"\bquanto\b"),
    },
    data_types={
        DataType.PHOTO: (r"\bfoto\b", r"\bimmagin[ei]\b"),
        DataType.VOICE: (r"\bvocal[ei]\b", r"\bregistrazion[ei]\b", r"\baudio\b"),
        DataType.HEALTH: (
            r"\bpassi\b", r"\bsonno\b", r"\besercizio\b", r"\bfrequenza cardiaca\b",
            r"\bsalute\b", r"\ballenament\w*",
        ),
        DataType.TEXT: (r"\bdiario\b", r"\bappunti\b", r"\bnot[ae]\b"),
        DataType.LOCATION: (r"\bluogh?[io]\b", r"\bposizion[ei]\b", r"\bvisitat\w*", r"\bdove\b"),
        DataType.EVENT: (r"\beventi?\b", r"\briunion[ei]\b", r"\bappuntament[oi]\b"),
    },
    activities={
        "badminton": (r"\bbadminton\b",),
        "gym": (r"\bpalestra\b",),
        "running": (r"\bcorsa\b", r"\bcorrere\b"),
        "swimming": (r"\bnuoto\b", r"\bnuotare\b", r"\bpiscina\b"),
        "yoga": (r"\byoga\b",),
        "cycling": (r"\bciclismo\b", r"\bbici(?:cletta)?\b"),
        "restaurant": (r"\bristorant[ei]\b",),
    },
    metrics={
        "steps": (r"\bpassi\b",),
        "heart_rate": (r"\bfrequenza cardiaca\b", r"\bbattito\b"),
        "sleep": (r"\bsonno\b", r"\bdormito\b"),
    },
    periods={
        "day_before_yesterday": (r"\bl['’]altro ieri\b", r"\bieri l['’]altro\b"),
        "today": (r"\boggi\b",),
        "yesterday": (r"\bieri\b",),
        "this_week": (r"\bquesta settimana\b",),
        "last_week": (r"\bsettimana scorsa\b", r"\bscorsa settimana\b"),
        "this_month": (r"\bquesto mese\b",),
        "last_month": (r"\bmese scorso\b", r"\bscorso mese\b"),
        "this_year": (r"\bquest['’]anno\b", r"\bquesto anno\b"),
        "last_year": (r"\banno scorso\b", r"\bscorso anno\b"),
    },
    days_ago=(r"\b(\d+)\s+giorni?\s+fa\b",),
    weeks_ago=(r"\b(\d+)\s+settimane?\s+fa\b",),
)

PORTUGUESE = _pack(
    "pt",
    count=(r"\bquant[oa]s\b", r"\bnúmero de\b", r"\bvezes\b"),
    comparison=(r"\bcompar\w*", r"\bmais\b.{0,40}\bque\b", r"\bmenos\b.{0,40}\bque\b"),
    pattern=(
        r"\bnormalmente\b", r"\bgeralmente\b", r"\bcostumo\b", r"\ba que horas\b",
        r"\bquais dias\b", r"\bpadrão\b",
    ),
    correlation=(r"\bcorrelação\b",),
    aggregation={
        AggregationOp.AVG: (r"\bmédia\b",),
        AggregationOp.MAX: (r"\bmáximo\b", r"\bmais alto\b"),
        AggregationOp.MIN: (r"\bmínimo\b", r"\bmais baixo\b"),
        AggregationOp.SUM: (r"\btotal\b", r"\bsoma\b", r"\bquant[oa]\b"),
    },
    data_types={
        DataType.PHOTO: (r"\bfotos?\b", r"\bimage(?:m|ns)\b"),
        DataType.VOICE: (r"\bvoz\b", r"\bgravaç(?:ão|ões)\b", r"\báudios?\b"),
        DataType.HEALTH: (
            r"\bpassos\b", r"\bhoras de sono\b", r"\bexercício\b", r"\bfrequência cardíaca\b",
            r"\bsaúde\b", r"\btrein\w*",
        ),
        DataType.TEXT: (r"\bdiário\b", r"\bnotas?\b"),
        DataType.LOCATION: (r"\blugar(?:es)?\b", r"\blocais\b", r"\bvisit\w*", r"\bonde\b"),
        DataType.EVENT: (r"\beventos?\b", r"\breuni(?:ão|ões)\b", r"\bcompromissos?\b", r"\bcalendário\b"),
    },
    activities={
        "badminton": (r"\bbadminton\b",),
        "gym": (r"\bacademia\b",),
        "running": (r"\bcorrida\b", r"\bcorrer\b"),
        "swimming": (r"\bnatação\b", r"\bnadar\b"),
        "yoga": (r"\bioga\b", r"\byoga\b"),
        "cycling": (r"\bciclismo\b", r"\bbicicleta\b"),
        "restaurant": (r"\brestaurantes?\b",),
    },
    metrics={
        "steps": (r"\bpassos\b",),
        "heart_rate": (r"\bfrequência cardíaca\b", r"\bbatimentos\b"),
        "sleep": (r"\bhoras de sono\b", r"\bdormi\b"),
    },
    periods={
        "day_before_yesterday": (r"\banteontem\b",),
        "today": (r"\bhoje\b",),
        "yesterday": (r"\bontem\b",),
        "this_week": (r"\bn?esta semana\b",),
        "last_week": (r"\bsemana passada\b",),
        "this_month": (r"\bn?este mês\b",),
        "last_month": (r"\bmês passado\b",),
        "this_year": (r"\bn?este ano\b",),
        "last_year": (r"\bano passado\b",),
    },
    days_ago=(r"\bhá\s+(\d+)\s+dias?\b", r"\b(\d+)\s+dias?\s+atrás\b"),
    weeks_ago=(r"\bhá\s+(\d+)\s+semanas?\b",),
)

LANGUAGE_PACKS: List[LanguagePack] = [
    ENGLISH,
    CHINESE,
    JAPANESE,
    KOREAN,
    SPANISH,
    FRENCH,
    GERMAN,
    ITALIAN,
    PORTUGUESE,
]
