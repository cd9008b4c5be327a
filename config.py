# config.py
# 시뮬레이션/화면 상수 정의
# 길이 단위는 인치(in), 화면 좌표는 픽셀(px), 시간은 초(s) 기준

# 입자 풀 크기
PARTICLE_COUNT = 300

# 파이프 벽 두께 [px]
WALL_BUFFER = 5

# 프레임마다 목표값으로 다가가는 비율 (레이놀즈 수, 속도 분포)
LERP_FACTOR = 0.05

# 뷰 전환(크로스페이드) 시간 [s]
TRANSITION_DURATION = 0.5

# 설명 오버레이 등장 애니메이션 시간 [s]
EXPLANATION_DURATION = 0.5

# 전체화면 요청 중복 방지 시간 [s]
FULLSCREEN_PENDING = 0.1


# 레이놀즈 수 범위 및 유동 영역 경계
class Reynolds:
    MIN = 1000
    MAX = 30_000_000
    LAMINAR = 2300 # 이하 층류
    TURBULENT = 4000 # 이상 난류 (사이는 천이 구간)


# 완전 난류 판정 기준: 점성항이 조도항의 몇 % 미만이면 무시 가능한지
# 0.02 ~ 0.05 범위에서 조정
FULLY_ROUGH_THRESHOLD = 0.05


# Moody 선도 상의 상대 조도 곡선 (id, 값, 표시 라벨) / 순서가 곧 동점 처리 우선순위
ROUGHNESS_LEVELS = (
    ("curve-0_05", 0.05, "0.05000"),
    ("curve-0_04", 0.04, "0.04000"),
    ("curve-0_03", 0.03, "0.03000"),
    ("curve-0_02", 0.02, "0.02000"),
    ("curve-0_015", 0.015, "0.01500"),
    ("curve-0_01", 0.01, "0.01000"),
    ("curve-0_005", 0.005, "0.00500"),
    ("curve-0_002", 0.002, "0.00200"),
    ("curve-0_001", 0.001, "0.00100"),
    ("curve-0_0005", 5e-4, "0.00050"),
    ("curve-0_0002", 2e-4, "0.00020"),
    ("curve-0_0001", 1e-4, "0.00010"),
    ("curve-smooth", 0.0, "Smooth"),
)


# 파이프 규격
class Pipe:
    # Schedule 40 호칭경별 내경 [in]
    SCHEDULE_40 = {
        '2"': 2.067, '3"': 3.068, '4"': 4.026, '6"': 6.065,
        '8"': 7.981, '10"': 10.020, '12"': 11.938, '14"': 13.124,
        '16"': 15.000, '18"': 16.876, '20"': 18.812, '24"': 22.624,
    }
    DEFAULT_DIAMETER = 4.026 # 4"
    DIAMETER_RANGE = (0.1, 30.0)

    # 절대 조도 [in]
    DEFAULT_ROUGHNESS = 0.0018 # 신품 상업용 강관
    ROUGHNESS_RANGE = (0.0, 0.1)
    ROUGHNESS_STEP = 0.0002


# 버튼 프리셋별 목표 레이놀즈 수
PRESETS = {
    "laminar": 2000,
    "partially-turbulent": 20_000,
    "fully-turbulent": 15_000_000,
}

# 마찰 계수 모델 (이름, 표시색) / 기본 활성 상태
MODELS = {
    "colebrook": ("Colebrook", (233, 69, 96)),
    "igt": ("IGT", (74, 144, 226)),
    "aga": ("AGA", (80, 227, 194)),
}
DEFAULT_MODELS = {"colebrook": True, "igt": False, "aga": False}


# 라벨 카테고리 (키, 표시 이름)
LABEL_CATEGORIES = {
    "infoBox": "Info Boxes",
    "layerLabels": "Layer Labels",
    "gauges": "Gauges & Meters",
    "contextual": "Contextual Notes",
}

# 주석(오버레이) id -> 라벨 카테고리
ANNOTATION_CATEGORY = {
    "boundary-infobox": "infoBox",
    "wall-infobox": "infoBox",
    "boundary-boundary-label": "layerLabels",
    "boundary-sublayer-label": "layerLabels",
    "wall-boundary-label": "layerLabels",
    "wall-sublayer-label": "layerLabels",
    "boundary-profile-gauge": "gauges",
    "wall-condition-gauge": "gauges",
    "boundary-text-1": "contextual",
    "wall-peak-label": "contextual",
    "wall-friction-driver": "contextual",
    # 전체 뷰 설명 오버레이
    "explain-laminar-1": "contextual",
    "explain-laminar-2": "contextual",
    "explain-laminar-3": "contextual",
    "explain-turb-1": "contextual",
    "explain-turb-2": "contextual",
    "explain-turb-3": "contextual",
    "explain-laminar-infobox": "infoBox",
    "explain-fullyturb-infobox": "infoBox",
    "explain-partturb-infobox": "infoBox",
}

# 크기 조절 시 최소 폭 [px]
MIN_ANNOTATION_WIDTH = 50


# 뷰별 기하 상수
class View:
    class Full:
        BOUNDARY = (30.0, 5.0) # 경계층 두께 (Re 하한, Re 상한) [px]
        SUBLAYER = (8.0, 1.0) # 점성 저층 두께
        LAMINAR_BOUNDARY = 30.0
        LAMINAR_SUBLAYER = 8.0
        RESTITUTION = 0.5

    class Boundary:
        WALL_BASE = 0.9 # 화면 높이 대비 벽 기준선 위치
        ZOOM = 2000.0 # 조도 확대 배율 [px/in]
        BOUNDARY = (100.0, 40.0)
        SUBLAYER = (40.0, 5.0)
        MAX_VX = (4.0, 20.0)
        SPEED_COLOR_MAX = 16.0

    class Wall:
        WALL_BASE = 0.85
        ZOOM = 25000.0
        BOUNDARY = (250.0, 80.0)
        SUBLAYER = (80.0, 10.0)
        MAX_VX = (2.0, 9.0)
        SPEED_COLOR_MAX = 4.0

    # 점성 저층 경계면 반발 계수
    SUBLAYER_RESTITUTION = 0.3
    # 재투입 시 화면 왼쪽 바깥 범위 [px]
    SPAWN_BAND = 40.0


# Moody 선도 축 범위 (Fanning 기준)
class Diagram:
    RE_RANGE = (float(Reynolds.MIN), float(Reynolds.MAX))
    F_RANGE = (0.002, 0.025)
    CURVE_POINTS = 400
    LABEL_SPACING = 12 # y축 동적 라벨 최소 간격 [px]


# 색상 (RGB)
class Color:
    BACKGROUND = (22, 33, 62)
    PANEL = (26, 26, 46)
    PIPE = (74, 85, 104)
    ACCENT = (233, 69, 96) # 경계층, 상자 테두리
    SUBLAYER = (74, 144, 226)
    PARTICLE = (167, 197, 235)
    TEXT = (220, 220, 220)
    WHITE = (255, 255, 255)
    RIPPLE = (200, 220, 255)
    GRID = (60, 70, 100)


# 화면
class Screen:
    WIDTH = 1600
    HEIGHT = 900
    FPS = 60
    TITLE = "Moody Diagram Explorer"
    SIDEBAR = 520 # 오른쪽 패널 폭 [px]
    PROFILE = 180 # 파이프 뷰 오른쪽 속도 분포 영역 폭 [px]
    MIN_VIEW = 100 # 파이프 뷰 최소 폭/높이 [px]
    HUD = 150 # 아래쪽 안내 영역 높이 [px]
