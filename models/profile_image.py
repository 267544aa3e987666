from sqlalchemy import Column, BigInteger, Text, ForeignKey

from .base import Base, CreatedAtMixin


class ProfileImage(CreatedAtMixin, Base):
    __tablename__ = "profile_images"

    id = Column(BigInteger, primary_key=True, index=True)
    profile_id = Column(
        BigInteger, ForeignKey("profile.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # No unique constraint: reruns of the folder import add duplicates
    file_url = Column(Text, nullable=False)

    def __repr__(self):
        return f"<ProfileImage id={self.id} url={self.file_url}>"
