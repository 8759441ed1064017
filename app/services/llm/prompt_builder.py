from __future__ import annotations

from typing import Sequence

CLASSIFICATION_TEMPLATE = """
你是一个专业的图片内容识别和分类系统。你的任务是根据提供的图片，从限定的分类列表中选出最相关的标签。

---
### 任务要求：
1. **识别内容:** 仔细分析图片中的所有视觉元素，包括但不限于主体、场景、背景、光线和整体氛围。
2. **多标签选择:** 允许选择一个或多个最能描述图片内容的标签。
3. **严格遵守分类列表:** 只能从提供的 <允许的分类列表> 中进行选择，禁止使用列表外的任何词汇或自定义类别。

---
### 输出格式要求（**严格遵守**）：
* **唯一输出:** 你的全部回复必须且只能是一个 JSON 对象。
* **无额外文本:** 绝对禁止在 JSON 对象的**前后**添加任何解释性文字、Markdown 格式化符号 (如 json) 或注释。
* **JSON 结构:** 必须包含一个键名为 cate 的数组。

---
### 输入信息：
* **允许的分类列表:** {categories}

---
### 示例输出：
{{"cate":["美食","生活"]}}

如果你识别到图片内容只属于“风景”一个类别，则返回：
{{"cate":["风景"]}}
"""


class PromptBuilder:
    """Builds the image classification instruction."""

    def __init__(self, template: str = CLASSIFICATION_TEMPLATE):
        self.template = template

    def build_classification_prompt(self, categories: Sequence[str]) -> str:
        """Embed the allowed categories (comma-separated) into the instruction."""
        return self.template.format(categories=",".join(categories))


__all__ = ["PromptBuilder", "CLASSIFICATION_TEMPLATE"]
