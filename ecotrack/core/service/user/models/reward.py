from typing import List, Optional

from pydantic import BaseModel


class Reward(BaseModel):
    """Catalog item that can be redeemed for points"""
    id: int
    name: str
    description: str
    points: int
    category: str
    available: bool = True


REWARD_CATALOG: List[Reward] = [
    Reward(
        id=1,
        name="Coffee Voucher",
        description="1 free coffee at partner cafes",
        points=150,
        category="Food & Drink",
    ),
    Reward(
        id=2,
        name="Eco-friendly Bag",
        description="Reusable shopping bag made from recycled materials",
        points=300,
        category="Eco Products",
    ),
    Reward(
        id=3,
        name="Tree Planting",
        description="Plant a tree in your name",
        points=500,
        category="Environment",
    ),
    Reward(
        id=4,
        name="Phone Credit",
        description="$5 mobile phone credit",
        points=250,
        category="Utilities",
    ),
]


def find_reward(reward_id: int) -> Optional[Reward]:
    return next((reward for reward in REWARD_CATALOG if reward.id == reward_id), None)
