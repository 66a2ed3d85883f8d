# routes/miner/models.py
from pydantic import BaseModel
from typing import Any, Optional, Union

class PoolInfo(BaseModel):
    fee: float
    algorithm: str
    difficulty: str
    token: str
    rewardPerShare: int

class ConnectResponse(BaseModel):
    success: bool
    message: str
    poolInfo: PoolInfo

class ShareResponse(BaseModel):
    success: bool
    message: str
    hnhReward: int
    rewardPending: bool = False
    totalShares: int
    totalEarnings: int
    hash: Optional[str] = None
    txHandle: Optional[str] = None
    error: Optional[str] = None

class MinerPoolStats(BaseModel):
    totalShares: int
    totalMiners: int
    yourSharePercentage: Union[str, int]

class MinerDetail(BaseModel):
    walletAddress: str
    workerName: str
    gpuInfo: Any
    hashrate: float
    shares: int
    totalEarnings: int
    lastSeen: int
    connectedAt: int
    lastShareSubmission: Optional[int] = None
    isActive: bool
    poolStats: MinerPoolStats
