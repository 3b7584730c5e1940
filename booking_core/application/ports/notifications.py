from abc import ABC, abstractmethod


class NotificationPort(ABC):
    @abstractmethod
    def send_email(self, address: str, subject: str, body: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def send_sms(self, number: str, body: str) -> None:
        raise NotImplementedError
