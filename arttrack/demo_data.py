"""Bundled default dataset, used to seed storage and as the fallback when stored data is unreadable."""

from typing import List

from arttrack.services.pipeline import CommissionStatus
from arttrack.services.records import CommissionRecord


DEFAULT_COMMISSION_TYPES = [
    "大頭貼",
    "半身",
    "全身",
    "插畫",
    "立繪設計",
    "Q版",
    "社團特殊委託",
]

DEFAULT_FORM_TYPE = "半身"

DEMO_ARTISTS = ["兔兔老師", "熊熊繪圖"]


def get_demo_commissions() -> List[CommissionRecord]:
    """Return fresh CommissionRecord objects (callers may mutate them)."""
    return [
        CommissionRecord(
            id="c-101",
            artist_id="兔兔老師",
            user_id="兔兔老師",
            client_name="星野光",
            title="精靈遊俠頭像",
            description="一張高精靈遊俠在雨中的憂鬱頭像。希望能強調眼神的光影和雨滴的氛圍感。",
            type="大頭貼",
            price=1500,
            status=CommissionStatus.RENDER,
            date_added="2023-10-25",
            last_updated="2023-11-02",
            thumbnail_url="https://picsum.photos/400/400?random=1",
        ),
        CommissionRecord(
            id="c-102",
            artist_id="熊熊繪圖",
            user_id="熊熊繪圖",
            client_name="MomoChan",
            title="賽博龐克街道背景",
            description="細緻的霓虹燈巷弄背景，有一隻橘貓坐在垃圾桶上看著鏡頭。",
            type="插畫",
            price=5000,
            status=CommissionStatus.SKETCH,
            date_added="2023-10-28",
            last_updated="2023-10-30",
            thumbnail_url="https://picsum.photos/400/300?random=2",
        ),
        CommissionRecord(
            id="c-103",
            artist_id="兔兔老師",
            user_id="兔兔老師",
            client_name="鐵拳阿豪",
            title="D&D 跑團角色全家福",
            description="五個角色在酒館慶祝的場景。包含矮人戰士、人類法師、提夫林盜賊等。",
            type="插畫",
            price=8000,
            status=CommissionStatus.QUEUE,
            date_added="2023-11-01",
            last_updated="2023-11-01",
            thumbnail_url="https://picsum.photos/400/250?random=3",
        ),
        CommissionRecord(
            id="c-104",
            artist_id="熊熊繪圖",
            user_id="熊熊繪圖",
            client_name="Viper007",
            title="重裝機甲設定",
            description="重型突擊機甲的概念設計圖。配色以叢林迷彩和鐵灰色為主。",
            type="立繪設計",
            price=3500,
            status=CommissionStatus.LINEART,
            date_added="2023-10-20",
            last_updated="2023-10-29",
            thumbnail_url="https://picsum.photos/400/400?random=4",
        ),
    ]
